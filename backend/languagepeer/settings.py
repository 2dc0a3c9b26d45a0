from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Bedrock Runtime (Converse API, authenticated with a Bedrock API key)
	bedrock_api_key: str | None = Field(default=None, validation_alias="BEDROCK_API_KEY")
	bedrock_region: str = Field(default="us-east-1", validation_alias="AWS_REGION")
	bedrock_model: str = Field(default="anthropic.claude-3-haiku-20240307-v1:0", validation_alias="BEDROCK_MODEL_ID")
	bedrock_max_tokens: int = Field(default=300, validation_alias="BEDROCK_MAX_TOKENS")
	bedrock_temperature: float = Field(default=0.7, validation_alias="BEDROCK_TEMPERATURE")
	bedrock_timeout_seconds: float = Field(default=30, validation_alias="BEDROCK_TIMEOUT_SECONDS")

	# OpenRouter fallback configuration (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="LanguagePeer", validation_alias="OPENROUTER_TITLE")

	# Conversation behaviour
	default_personality: str = Field(default="friendly-tutor", validation_alias="DEFAULT_PERSONALITY")
	# Suggest a new topic once a conversation has more messages than this
	topic_suggestion_threshold: int = Field(default=20, validation_alias="TOPIC_SUGGESTION_THRESHOLD")
	session_retention_days: int = Field(default=7, validation_alias="SESSION_RETENTION_DAYS")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
