"""Test suite for keyline.

Test Structure:
- unit/: Unit tests for individual components
  - curves/: Timing-function parsing and serialization
  - stylesheet/: CSS object model and rule extraction
  - syntax/: Syntax tree offsets and node lookups
  - editing/: Text-patch engine and the in-memory document
  - playback/: Play state and animation reconciliation
  - config/, utils/, cli/: Ambient layers
- fakes.py: In-memory animation host used by playback and session tests
- conftest.py: Shared fixtures and test configuration
"""
