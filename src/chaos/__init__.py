__VERSION__ = "0.1.0"
