# tests/validation/__init__.py
"""Physics verification tests for solarlens.

These tests go beyond software correctness to verify:
- Radiometric fidelity (deconvolution conserves flux)
- Optical physics (focal line, corona falloff)
- Detection statistics (threshold behavior, empty frames)
"""
