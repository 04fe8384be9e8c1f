from .dto.errors import SafeErrorResponse as SafeErrorResponse
