from .reportlab_renderer import ReportLabRenderer

__all__ = ["ReportLabRenderer"]
