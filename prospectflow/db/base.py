from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models register themselves by importing Base; prospectflow.db.models imports them all
# All models must import Base from this module
