"""Project Hub: a directory of GitHub Pages projects."""
