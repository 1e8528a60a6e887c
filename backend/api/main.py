from contextlib import asynccontextmanager
from functools import partial
from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel
from typing import List, Optional
import logging
import re

from api.config import settings
from scrapers.base import AllSitesFailedError, NoResultsError, UnknownCountryError
from scrapers.config import COUNTRY_SITES, get_site_summary, list_countries
from scrapers.manager import ScraperManager, create_crawler

# Setup logging directory
settings.log_dir.mkdir(parents=True, exist_ok=True)


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


# Setup logging with color support for console, stripped for file
file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
file_handler.setFormatter(ColorStripFormatter(settings.log_format))

console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(settings.log_format))

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    handlers=[file_handler, console_handler],
    force=True  # Override any existing configuration
)

# Site scraper loggers ('scraper.<site>') get their own handlers and do not
# propagate, so each line appears once
scraper_logger = logging.getLogger('scraper')
scraper_logger.propagate = False
# Only add handlers if not already present (prevents duplicates on module reload)
if not scraper_logger.handlers:
    scraper_file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    scraper_file_handler.setFormatter(ColorStripFormatter(settings.log_format))
    scraper_logger.addHandler(scraper_file_handler)

    scraper_console_handler = logging.StreamHandler()
    scraper_console_handler.setFormatter(logging.Formatter(settings.log_format))
    scraper_logger.addHandler(scraper_console_handler)
scraper_logger.setLevel(getattr(logging, settings.log_level.upper()))

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Price Compare Backend Starting Up")
    logger.info("=" * 60)
    logger.info(f"Log file: {settings.log_file}")
    logger.info(f"CORS origins: {settings.cors_origins}")
    logger.info(f"Countries: {', '.join(list_countries())}")
    logger.info(f"Navigation timeout: {settings.scraper_navigation_timeout}s")
    logger.info("Backend ready to accept requests")

    yield  # Application runs here

    # Shutdown - browsers are per request, nothing to release here
    logger.info("Price Compare Backend Shutting Down")


app = FastAPI(
    title="Price Compare API",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware - the frontend runs on another origin
# Note: allow_credentials must be False when allow_origins is ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    """Return empty response for favicon requests"""
    return Response(status_code=204)


def get_manager() -> ScraperManager:
    """Build a scraper manager from settings (one per request)."""
    return ScraperManager(
        crawler_factory=partial(
            create_crawler,
            headless=settings.scraper_headless,
            user_agent=settings.scraper_user_agent,
        ),
        navigation_timeout=settings.scraper_navigation_timeout,
    )


# Pydantic models for API requests and responses
class SearchRequest(BaseModel):
    # Optional so a missing field is answered with 400 instead of 422
    country: Optional[str] = None
    query: Optional[str] = None


class ListingResponse(BaseModel):
    productName: str
    link: str
    price: float
    currency: str
    website_name: str
    parameter1: str = ""


class CountryResponse(BaseModel):
    country: str
    sites: int


class SiteResponse(BaseModel):
    country: str
    name: str
    short_name: str
    type: str
    currency: str
    link_mode: str
    enabled: bool
    search_url: str


# API Endpoints

@app.get("/")
async def root():
    return {"message": "Price Compare API", "version": "1.0.0"}


@app.get("/api/countries", response_model=List[CountryResponse])
async def get_countries():
    """Supported country codes and how many sites each one searches"""
    return [
        {"country": code, "sites": sum(1 for s in COUNTRY_SITES[code] if s.enabled)}
        for code in list_countries()
    ]


@app.get("/api/sites", response_model=List[SiteResponse])
async def get_sites(country: Optional[str] = Query(None, description="Filter by country code")):
    """Configured retail sites"""
    sites = get_site_summary(country)
    if country and not sites:
        raise HTTPException(status_code=404, detail=f"No scraping configurations found for country: {country}.")
    return sites


@app.post("/api/search", response_model=List[ListingResponse])
async def search_prices(
    request: SearchRequest,
    manager: ScraperManager = Depends(get_manager)
):
    """Search every site of a country and return listings sorted by price"""
    if not (request.country or '').strip() or not (request.query or '').strip():
        raise HTTPException(status_code=400, detail="Country and query are required.")

    try:
        result = await manager.search(request.country, request.query)
    except UnknownCountryError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AllSitesFailedError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=500, detail=str(e))
    except NoResultsError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing search request: {e}")
        raise HTTPException(status_code=500, detail="Failed to perform search due to an internal server error.")

    return result.to_list()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host=settings.api_host, port=settings.api_port, reload=settings.api_debug)
