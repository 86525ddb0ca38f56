"""
coursequiz - terminal client for course platform activities.

Loads an activity from the course platform, walks the learner through its
questions, submits the answers for grading and shows the graded review.
"""

__version__ = "1.0.0"
