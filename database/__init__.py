"""User storage: ORM model, connection guard, UserStore."""
