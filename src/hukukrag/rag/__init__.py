"""hukukrag RAG core — analyzer, retriever, reranker, assembler, citations."""
