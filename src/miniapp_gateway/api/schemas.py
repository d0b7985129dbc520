"""Request bodies accepted by the Mini-App functions."""

from pydantic import BaseModel, ConfigDict, Field


class _FunctionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    init_data: str | None = Field(default=None, alias="initData")


class SyncProfileRequest(_FunctionRequest):
    """Body of tg-sync-profile."""


class ArticleDraft(BaseModel):
    """Article fields submitted by the author."""

    title: str | None = None
    body: str | None = None
    preview: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    category_id: str | None = None
    is_anonymous: bool = False
    allow_comments: bool | None = None


class CreateArticleRequest(_FunctionRequest):
    """Body of tg-create-article."""

    article: ArticleDraft | None = None


class GiveReputationRequest(_FunctionRequest):
    """Body of tg-give-reputation."""

    target_user_id: str | None = Field(default=None, alias="targetUserId")
    reason: str | None = None


class UserReputationRequest(_FunctionRequest):
    """Body of tg-user-reputation."""

    user_id: str | None = Field(default=None, alias="userId")


class ProductDraft(BaseModel):
    """Product fields submitted by the owner."""

    title: str | None = None
    description: str | None = None
    price: float | str | None = None
    currency: str | None = None
    media_url: str | None = None
    link: str | None = None


class ManageProductRequest(_FunctionRequest):
    """Body of tg-manage-product."""

    action: str | None = None
    product_id: str | None = Field(default=None, alias="productId")
    product: ProductDraft | None = None


class RejectArticleRequest(BaseModel):
    """Body of the admin reject endpoint."""

    reason: str | None = None


class RegisterWebhookRequest(BaseModel):
    """Body of the admin webhook registration endpoint."""

    url: str | None = None
