"""Text and token I/O for the JSON Workbench."""

from .share_codec import ShareCodec
from .yaml_writer import YamlWriter

__all__ = ["ShareCodec", "YamlWriter"]
