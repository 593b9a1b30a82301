"""
dynstore CLI

Commands:
- dynstore replay - Replay a JSONL action log through a store
- dynstore version - Show version information
"""
