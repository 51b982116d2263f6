# tests/__init__.py
"""
Test Suite for cob_scenes

Organization:
- parsing:     test_values, test_document_parser, test_state_policy
- domain:      test_models, test_serializer
- adapters:    test_scene_loader (disk + cache)
- front ends:  test_cli, test_shared (config + logging)
"""
