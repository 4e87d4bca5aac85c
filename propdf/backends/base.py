"""Base backend interface for PDF composition operations."""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Tuple

from ..core.sources import SourceFile


class Backend(ABC):
    """Abstract base class for PDF composition backends."""

    SUPPORTED_OPERATIONS: List[str] = []

    def supports(self, operation: str, format: str = "") -> bool:
        """
        Check if this backend can handle the specified operation.

        Args:
            operation: The operation name (e.g., "merge", "split")
            format: Optional format hint (e.g., "pdf")

        Returns:
            True if this backend supports the operation, False otherwise
        """
        return operation in self.SUPPORTED_OPERATIONS

    @abstractmethod
    def process(
        self,
        files: List[SourceFile],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        """
        Run the operation over the uploaded files.

        Args:
            files: Uploaded files, in the order the caller supplied them
            operation: Operation to perform
            options: Operation-specific options

        Returns:
            Tuple of (output_data, format, metadata)
            - output_data: Output bytes (a PDF, or JSON for "info")
            - format: Output format ("pdf" or "json")
            - metadata: Values for response headers (page counts, source counts)

        Raises:
            ValueError: If options or inputs are invalid; composition
                failures are ValueError subclasses carrying a ``code``
            RuntimeError: If processing fails
        """
        pass
