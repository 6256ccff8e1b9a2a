# Services package init
"""
QA Extractor: Services Layer
===============================

Service Inventory:
    - ImageNormalizer: shrink-to-fit JPEG re-encoding (Pillow)
    - ModelClient (abstract): interface for image-to-text model calls
    - GeminiClient: ModelClient backed by Google Gemini
    - qa_parser: Q<n>/A<n> text → QAPair list
    - FileService: upload / filesystem path → ImageBuffer
    - ExtractionService: normalize → model → parse for one image

Services receive their collaborators through constructors; create_app()
wires them together and routes reach them through FastAPI dependencies.
"""
