"""
Infrastructure Layer - External Systems Integration

Contains:
- sources: Provider adapters (PubMed, Scopus, Web of Science)
- ncbi: iCite relative citation ratio lookups
- llm: Azure OpenAI abstract classifier
"""
