"""Graphical user interface for TilawaFlow.

This subpackage contains the PyQt6 widgets of the application and the
thread pool glue that keeps network fetches off the GUI thread.  The
widgets hold no playback logic; they render the observables of a
:class:`~tilawaflow.core.session.RecitationSession` and forward user
actions to it.

Note that the GUI depends on the ``PyQt6`` package (including
``QtMultimedia``).  On a headless machine set
``QT_QPA_PLATFORM=offscreen`` to run the widget tests.
"""
