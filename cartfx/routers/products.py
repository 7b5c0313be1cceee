from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from cartfx.core.config import Settings
from cartfx.models.product import PricedProduct, SuggestionOut
from cartfx.services.catalog import DEFAULT_SUGGEST_LIMIT, ProductCatalog
from cartfx.services.rates.conversion import ConversionEngine
from .deps import get_app_settings, get_catalog, get_engine

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[PricedProduct], summary="List products priced in a currency")
async def list_products(
    currency: Optional[str] = Query(None, description="Display currency (defaults to settings)"),
    q: Optional[str] = Query(None, description="Substring filter on name/description"),
    sort: Optional[str] = Query(
        None, description="price-asc | price-desc | name-asc | name-desc"
    ),
    catalog: ProductCatalog = Depends(get_catalog),
    engine: ConversionEngine = Depends(get_engine),
    settings: Settings = Depends(get_app_settings),
):
    return await catalog.priced_listing(
        engine, currency or settings.default_currency, query=q, sort_by=sort
    )


@router.get("/suggest", response_model=List[SuggestionOut], summary="Autocomplete product names")
async def suggest(
    q: str = Query(..., description="Prefix typed so far"),
    limit: int = Query(DEFAULT_SUGGEST_LIMIT, ge=1, le=50),
    catalog: ProductCatalog = Depends(get_catalog),
):
    return [
        SuggestionOut(word=s.word, product_ids=list(s.payloads))
        for s in catalog.suggest(q, limit)
    ]


@router.get("/{product_id}", response_model=PricedProduct, summary="One product priced in a currency")
async def get_product(
    product_id: str,
    currency: Optional[str] = Query(None),
    catalog: ProductCatalog = Depends(get_catalog),
    engine: ConversionEngine = Depends(get_engine),
    settings: Settings = Depends(get_app_settings),
):
    product = catalog.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"product {product_id} not found")
    quote = await engine.quote(
        product.price_base, product.currency_base, currency or settings.default_currency
    )
    return PricedProduct(
        **product.model_dump(),
        price=quote.converted,
        currency=quote.to_currency,
        price_source=quote.source,
    )
