"""Hotfix release engine.

Key Components:
    - HotfixPipeline: Runs the stages in order for one trigger event
    - HotfixContext: Carries the event and every stage's outcome
    - HotfixStage: Base class for the pipeline stages
"""
