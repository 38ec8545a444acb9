from typing import Any

from fastapi import APIRouter, Depends, Request
from graphql import graphql_sync
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.auth.dependencies import AuthResult, get_auth
from app.db.database import get_db
from app.gql.errors import format_error
from app.gql.resolvers import root_value
from app.gql.schema import schema

router = APIRouter(tags=["graphql"])


class GraphQLRequest(BaseModel):
    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(None, alias="operationName")


@router.post("/graphql")
def graphql_endpoint(
    payload: GraphQLRequest,
    request: Request,
    auth: AuthResult = Depends(get_auth),
    db: Session = Depends(get_db)
):
    result = graphql_sync(
        schema,
        payload.query,
        root_value=root_value,
        context_value={"db": db, "auth": auth, "images": request.app.state.images},
        variable_values=payload.variables,
        operation_name=payload.operation_name,
    )
    body: dict[str, Any] = {"data": result.data}
    if result.errors:
        body["errors"] = [format_error(e) for e in result.errors]
    return body
