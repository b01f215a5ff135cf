"""hukukrag — query understanding, retrieval and citation core for a Turkish legal assistant."""

from hukukrag.ingest.legal import semantic_chunk
from hukukrag.memory.window import build_context, generate_summary, needs_summarization
from hukukrag.rag.analyzer import analyze_query
from hukukrag.rag.assembler import estimate_tokens, format_context_from_results
from hukukrag.rag.citations import add_citations, extract_citation_numbers, validate_citations
from hukukrag.rag.reranker import rerank_results
from hukukrag.rag.retriever import keyword_retrieval

__all__ = [
    "add_citations",
    "analyze_query",
    "build_context",
    "estimate_tokens",
    "extract_citation_numbers",
    "format_context_from_results",
    "generate_summary",
    "keyword_retrieval",
    "needs_summarization",
    "rerank_results",
    "semantic_chunk",
    "validate_citations",
]
