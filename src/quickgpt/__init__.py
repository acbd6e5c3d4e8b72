"""quickgpt: quick prompts to a chat-completion API with formatted replies."""
