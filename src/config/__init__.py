"""Config package initialization"""

# Import classes only when needed to avoid circular imports
# Use direct imports in your code: from config.constants import MAX_BATCH_SIZE

__all__ = [
    'get_settings',
    'IngestorSettings',
    'AWSConfig',
]
