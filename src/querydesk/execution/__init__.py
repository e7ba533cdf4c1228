from querydesk.execution.dispatcher import QueryDispatcher
from querydesk.execution.normalizer import normalize, normalize_rows
from querydesk.execution.translator import ResourceKind, match_resource, translate

__all__ = ["QueryDispatcher", "normalize", "normalize_rows", "ResourceKind", "match_resource", "translate"]
