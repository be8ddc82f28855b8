"""cpresolve - resolve Maven coordinates into a cached runtime classpath."""

__version__ = "0.1.0"
