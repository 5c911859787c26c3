"""Test suite for formtester.

This package contains tests for:
- Validation engine (required fields, types, custom messages)
- Route table matching and URL building
- Collaborator stand-ins (redirector, route and user resolvers)
- FormRequest authorization and validation flow
- Evaluation lifecycle transitions
- FormRequestTester scenarios, memoization and assertions
"""
