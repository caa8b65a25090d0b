from .factory import get_adapter
from .normalizer import find_secret, merge_form_fields, normalize_payload
from .types import InternalSubmission, SubmissionFields

__all__ = [
    'get_adapter',
    'find_secret',
    'merge_form_fields',
    'normalize_payload',
    'InternalSubmission',
    'SubmissionFields',
]
