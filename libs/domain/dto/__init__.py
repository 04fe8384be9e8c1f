from .errors import SafeErrorResponse as SafeErrorResponse
