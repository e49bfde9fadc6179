"""
Front ends that turn user input into type declarations:
- Python classes (class_reader)
- YAML / JSON documents (document_loader)
"""
