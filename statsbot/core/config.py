from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Bot settings, loaded from environment variables and .env file.

    Required env vars:
        DISCORD_TOKEN   - Discord bot token used to log in to the gateway
        GITHUB_TOKEN    - GitHub PAT sent with every search/profile request
    """

    model_config = {"env_file": ".env", "extra": "ignore"}

    # Credentials
    discord_token: str = ""
    github_token: str = ""

    # GitHub API
    github_api_url: str = "https://api.github.com"
    github_profile_url: str = "https://github.com"  # used for profile links and .png thumbnails
    # Search returns at most 100 items per page; a larger value would make the
    # first page look short and end pagination early
    page_size: int = Field(default=100, ge=1, le=100)
    request_timeout: float = 30.0

    # Chat commands
    report_command: str = "!github"
    partner_command: str = "!gssoc"
    compare_command: str = "!compare"

    # Label that marks contributions made through the partner program
    partner_label: str = "gssoc-ext"

    # How long a report message listens for tier reactions
    reaction_window_seconds: float = 60.0

    log_level: str = "INFO"


settings = Settings()
