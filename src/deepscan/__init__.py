"""deepscan - license compliance deep scans of npm packages and projects.

Stages a build context, runs the OSS Review Toolkit inside a container and
reports the policy violations found in its evaluation result.
"""

__version__ = "0.3.0"
