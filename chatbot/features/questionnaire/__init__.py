"""Questionnaire feature: DTOs, state machine, service, and controller.

Walks the user through the remote question sequence one question at a time
and submits the collected answers for a book recommendation. No state is
persisted; a session lives as long as its controller.
"""
