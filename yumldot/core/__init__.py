"""Diagram compiler pipeline: tokenizer, classifier, resolvers, serializer."""
