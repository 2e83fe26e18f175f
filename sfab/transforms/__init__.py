"""View-model transforms for Site Fabricator."""
