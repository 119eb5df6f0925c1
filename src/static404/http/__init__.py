"""Request and response types shared by the handler and its collaborators."""
