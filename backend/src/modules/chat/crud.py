"""CRUD operations for chat entities using FastCRUD."""

from fastcrud import FastCRUD

from .models import ChatMessage, ChatSession

chat_session_crud: FastCRUD = FastCRUD(ChatSession)
chat_message_crud: FastCRUD = FastCRUD(ChatMessage)
