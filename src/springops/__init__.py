"""Operations dashboard for a spring-manufacturing ERP backend."""

__version__ = "0.1.0"
