"""
Ingestion: source normalisation, chunking, and the embedding collaborator.

Uploaded files, pasted text and scraped web pages are normalised into
LangChain ``Document`` objects, split into overlapping chunks, and handed
to the vector store for embedding.
"""
