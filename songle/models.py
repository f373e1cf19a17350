from songle import db


class QuotaRecord(db.Model):
    __tablename__ = 'daily_quota'
    name = db.Column(db.String(64), primary_key=True)
    day = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD, device-local
    songs_played = db.Column(db.Integer, nullable=False, default=0)
    last_play_time = db.Column(db.BigInteger, nullable=True)  # epoch ms, NULL means never

    def to_dict(self):
        return {
            'name': self.name,
            'day': self.day,
            'songs_played': self.songs_played,
            'last_play_time': self.last_play_time,
        }
