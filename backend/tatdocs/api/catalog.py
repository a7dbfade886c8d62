"""
Product catalog and regulatory lookup endpoints.
"""
from fastapi import APIRouter
from tatdocs.schemas.catalog import HazmatLookupResponse, PackagingResponse, Product, ProductListResponse
from tatdocs.services.catalog import get_catalog

router = APIRouter()


@router.get("/products", response_model=ProductListResponse)
async def list_products():
    """List all products in catalog order."""
    products = get_catalog().products
    return ProductListResponse(products=products, count=len(products))


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """Get a product; unknown ids resolve to the first catalog product."""
    return get_catalog().get_product(product_id)


@router.get("/packaging", response_model=PackagingResponse)
async def get_packaging():
    catalog = get_catalog()
    return PackagingResponse(packaging=catalog.packaging, max_gross_weight_kg=catalog.max_gross_weight_kg)


@router.get("/hazmat/{un_number}", response_model=HazmatLookupResponse)
async def lookup_hazmat(un_number: str):
    """ERG guide number and proper shipping names for a UN number."""
    catalog = get_catalog()
    return HazmatLookupResponse(
        un_number=un_number,
        erg_number=catalog.get_erg_number(un_number),
        shipping_name=catalog.get_shipping_name(un_number),
    )
