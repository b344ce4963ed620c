"""Compile service boundary: request/response types and the HTTP client."""

from .client import CompilerExplorerClient, parse_compile_response
from .models import (
    AsmLine,
    CompileRequest,
    CompileResult,
    ExecutionResult,
    SourceRef,
    SourceTag,
    StreamLine,
)

__all__ = [
    "AsmLine",
    "CompileRequest",
    "CompileResult",
    "CompilerExplorerClient",
    "ExecutionResult",
    "SourceRef",
    "SourceTag",
    "StreamLine",
    "parse_compile_response",
]
