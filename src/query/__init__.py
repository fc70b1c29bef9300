"""Query translation and validation.

The query layer turns a GraphQL-flavored text query, or a caller-built structured body, into a
validated `SearchRequest` for the CRM search API, and prices the result in synthetic cost points.
"""
