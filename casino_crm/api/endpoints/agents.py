"""
Agent Endpoints Module

CRUD endpoints for agents. The listing is not paginated: the agent list is
short and feeds the agent pickers of the client forms.
"""
from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session
from casino_crm.api import deps
from casino_crm.db.session import get_db
from casino_crm.models import Agent
from casino_crm.models.user import User
from casino_crm.schemas.agent import AgentCreate, AgentRead, AgentUpdate
from casino_crm.schemas.common import DataResponse
from casino_crm.services import records, validators
from casino_crm.services.records import ListParams

router = APIRouter()

NOT_FOUND = "Agent not found"


@router.get("", response_model=DataResponse[List[AgentRead]])
def list_agents(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    List agents ordered by last name.

    Only active agents are returned unless includeInactive=true.
    """
    params = ListParams(
        sort_by="lastname",
        sort_order="asc",
        filters={} if include_inactive else {"is_active": True},
    )
    agents = records.agents.list_all(db, params)
    return {"data": [AgentRead.model_validate(agent) for agent in agents]}


@router.post("", response_model=DataResponse[AgentRead], status_code=status.HTTP_201_CREATED)
def create_agent(
    agent_in: AgentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Create a new agent. New agents are active unless is_active is sent.
    """
    agent_data = validators.validate_agent_create(agent_in.model_dump(exclude_unset=True))
    agent = records.agents.insert(db, Agent(**agent_data))
    return {"data": AgentRead.model_validate(agent)}


@router.get("/{agent_id}", response_model=DataResponse[AgentRead])
def read_agent(
    agent_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    agent = records.agents.get(db, agent_id, not_found_message=NOT_FOUND)
    return {"data": AgentRead.model_validate(agent)}


@router.patch("/{agent_id}", response_model=DataResponse[AgentRead])
def update_agent(
    agent_id: str,
    agent_update: AgentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    agent = records.agents.get(db, agent_id, not_found_message=NOT_FOUND)

    changes = agent_update.model_dump(exclude_unset=True)
    validators.validate_agent_update(changes)

    agent = records.agents.update(db, agent, changes)
    return {"data": AgentRead.model_validate(agent)}


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agent(
    agent_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Delete an agent. Clients assigned to it keep a dangling agent_id on
    databases that do not enforce the SET NULL rule.
    """
    agent = records.agents.get(db, agent_id, not_found_message=NOT_FOUND)
    records.agents.delete(db, agent)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
