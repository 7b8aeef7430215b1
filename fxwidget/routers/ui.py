from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from fxwidget.models.constants import available_currencies
from fxwidget.routers.rates import get_converter
from fxwidget.services.converter import ConverterController

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/", response_class=HTMLResponse)
def ui_home(
    request: Request,
    amount: Optional[str] = Query(None),
    source: Optional[str] = Query(None, alias="from"),
    target: Optional[str] = Query(None, alias="to"),
    converter: ConverterController = Depends(get_converter),
):
    try:
        view = converter.apply(source, target, amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    context = {
        "request": request,
        "version": request.app.version,
        "currencies": available_currencies(),
        "view": view,
    }
    return templates.TemplateResponse(request, "converter.html", context)


@router.post("/swap")
def ui_swap(converter: ConverterController = Depends(get_converter)):
    converter.swap()
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/refresh")
def ui_refresh(converter: ConverterController = Depends(get_converter)):
    converter.refresh()
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
