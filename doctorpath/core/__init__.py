"""Core domain logic: risk scoring, access control, documents, LLM and reports."""
