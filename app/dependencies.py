"""FastAPI providers for the store handles and the services built on them."""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.services.catalog import CatalogStore
from app.services.content_tree import ContentTreeResolver
from app.services.enrollment import EntitlementStore
from app.services.fulfillment import FulfillmentReconciler
from app.services.identity import IdentityDirectory


def get_identity_directory(db: Session = Depends(get_db)) -> IdentityDirectory:
    return IdentityDirectory(db)


def get_catalog_store(db: Session = Depends(get_db)) -> CatalogStore:
    return CatalogStore(db)


def get_entitlement_store(db: Session = Depends(get_db)) -> EntitlementStore:
    return EntitlementStore(db)


def get_tree_resolver(
    catalog: CatalogStore = Depends(get_catalog_store),
    entitlements: EntitlementStore = Depends(get_entitlement_store),
) -> ContentTreeResolver:
    return ContentTreeResolver(catalog, entitlements)


def get_reconciler(
    db: Session = Depends(get_db),
    identity: IdentityDirectory = Depends(get_identity_directory),
    catalog: CatalogStore = Depends(get_catalog_store),
    entitlements: EntitlementStore = Depends(get_entitlement_store),
) -> FulfillmentReconciler:
    return FulfillmentReconciler(
        identity=identity,
        catalog=catalog,
        entitlements=entitlements,
        transaction=db,
        expected_token=settings.hotmart_hottok,
        default_display_name=settings.default_display_name,
    )
