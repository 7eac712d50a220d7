"""Core, front-end agnostic building blocks of LP Toolkit."""
