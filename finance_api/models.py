# finance_api/models.py
# lightweight model classes (not DB-bound ORM)


def _row_get(row, key, default=None):
    return row[key] if key in row.keys() else default


class User:
    def __init__(self, id, username, email, password_hash, refresh_token=None, created_at=None):
        self.id = id
        self.username = username
        self.email = email
        self.password_hash = password_hash
        self.refresh_token = refresh_token
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            username=row['username'],
            email=row['email'],
            password_hash=row['password_hash'],
            refresh_token=_row_get(row, 'refresh_token'),
            created_at=_row_get(row, 'created_at'),
        )

    def to_dict(self):
        # never expose the hash or the refresh token
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'createdAt': self.created_at,
        }


class Transaction:
    def __init__(self, id, user_id, type, category, amount, date, notes=None, created_at=None, updated_at=None):
        self.id = id
        self.user_id = user_id
        self.type = type
        self.category = category
        self.amount = amount
        self.date = date
        self.notes = notes
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            user_id=row['user_id'],
            type=row['type'],
            category=row['category'],
            amount=float(row['amount']),
            date=row['date'],
            notes=row['notes'],
            created_at=_row_get(row, 'created_at'),
            updated_at=_row_get(row, 'updated_at'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'type': self.type,
            'category': self.category,
            'amount': self.amount,
            'date': self.date,
            'notes': self.notes,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }


class Budget:
    def __init__(self, id, user_id, category, title, amount, spent=0.0, percentage_used=0.0, created_at=None):
        self.id = id
        self.user_id = user_id
        self.category = category
        self.title = title
        self.amount = amount
        self.spent = spent
        self.percentage_used = percentage_used
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            user_id=row['user_id'],
            category=row['category'],
            title=row['title'],
            amount=float(row['amount']),
            spent=float(row['spent']),
            percentage_used=float(row['percentage_used']),
            created_at=_row_get(row, 'created_at'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'category': self.category,
            'title': self.title,
            'amount': self.amount,
            'spent': self.spent,
            'percentageUsed': self.percentage_used,
            'createdAt': self.created_at,
        }


class Goal:
    def __init__(self, id, user_id, goal_name, target_amount, current_amount, deadline,
                 status='in progress', notes=None, created_at=None, updated_at=None):
        self.id = id
        self.user_id = user_id
        self.goal_name = goal_name
        self.target_amount = target_amount
        self.current_amount = current_amount
        self.deadline = deadline
        self.status = status
        self.notes = notes
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            user_id=row['user_id'],
            goal_name=row['goal_name'],
            target_amount=float(row['target_amount']),
            current_amount=float(row['current_amount']),
            deadline=row['deadline'],
            status=row['status'],
            notes=row['notes'],
            created_at=_row_get(row, 'created_at'),
            updated_at=_row_get(row, 'updated_at'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'goalName': self.goal_name,
            'targetAmount': self.target_amount,
            'currentAmount': self.current_amount,
            'deadline': self.deadline,
            'status': self.status,
            'notes': self.notes,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
