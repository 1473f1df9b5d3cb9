from .lifecycle import PROCESSING_ERROR_MESSAGE, VideoEncoder, log_failure

__all__ = ["PROCESSING_ERROR_MESSAGE", "VideoEncoder", "log_failure"]
