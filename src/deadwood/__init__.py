"""Clean up local git branches whose upstream is missing or gone.

Features:
- List local branches with no upstream or a `gone` upstream
- Protect the default branch (main or master)
- Keep the checked-out branch out of the cleanup
- Safe deletion with an optional forced retry for unmerged branches
"""

__version__ = "0.1.0"
