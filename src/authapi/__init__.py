"""Cookie-session authentication API: register, login and logout over a Redis account store."""

__version__ = "1.0.0"
