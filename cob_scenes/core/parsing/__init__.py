from cob_scenes.core.parsing.document import parse_document

__all__ = ["parse_document"]
