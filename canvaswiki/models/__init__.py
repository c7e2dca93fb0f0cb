from canvaswiki.models.models import Asset, Comment, FileUpload, ParsedForm

__all__ = ["Asset", "Comment", "FileUpload", "ParsedForm"]
