"""
Services Layer
Read-only query helpers used by routes.

Services should:
- Not modify data models or apply business rules
- Be presentation-focused (filtering, ordering, pagination)
- Be stateless
"""
