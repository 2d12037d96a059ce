from sqlalchemy import event

from app.models.base import utcnow
from app.models.chat_session import ChatSession
from app.models.crm_user import CrmUser
from app.models.estimate import Estimate
from app.models.lead import Lead
from app.models.note import Note
from app.models.product import Product
from app.models.quote import Quote


# Auto updated_at
@event.listens_for(Lead, "before_update")
@event.listens_for(Quote, "before_update")
@event.listens_for(Estimate, "before_update")
@event.listens_for(ChatSession, "before_update")
@event.listens_for(CrmUser, "before_update")
@event.listens_for(Note, "before_update")
@event.listens_for(Product, "before_update")
def update_timestamp(mapper, connection, target):
    target.updated_at = utcnow()
