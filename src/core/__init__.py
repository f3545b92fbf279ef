"""Core package initialization"""

# Import classes only when needed to avoid circular imports
# Use direct imports in your code: from core.scheduler import TickScheduler

__all__ = [
    'TickScheduler',
    'ProofClient',
    'ChainClient',
    'ProofSubmitter',
    'IdentifierCatalog',
]
