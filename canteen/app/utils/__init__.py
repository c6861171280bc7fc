from .responses import err, error_response, ok

__all__ = ["ok", "err", "error_response"]
