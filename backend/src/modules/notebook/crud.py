"""CRUD operations for notebook entities using FastCRUD."""

from fastcrud import FastCRUD

from .models import Notebook

notebook_crud: FastCRUD = FastCRUD(Notebook)
