from fastapi import APIRouter, HTTPException, Query, status

from core.cocktaildb_client import CocktailDBError, lookup_cocktail_image

router = APIRouter()


@router.get("/lookup")
def lookup_image(name: str = Query(..., min_length=1, description="Cocktail name")):
    """
    Find a picture for a cocktail on TheCocktailDB.
    Returns {"name", "image_url"}; 404 when nothing matches, 502 when the API is unreachable.
    """
    try:
        image_url = lookup_cocktail_image(name)
    except CocktailDBError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Image lookup failed: {e}"
        )
    if not image_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No image found for '{name}'"
        )
    return {"name": name, "image_url": image_url}
