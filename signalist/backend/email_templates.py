"""HTML bodies for outgoing mail. ``{{placeholder}}`` markers are filled by mailer."""


WELCOME_EMAIL_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<body style="margin:0;padding:0;background-color:#050505;font-family:Arial,Helvetica,sans-serif;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color:#050505;">
    <tr>
      <td align="center" style="padding:40px 20px;">
        <table role="presentation" width="600" cellspacing="0" cellpadding="0" style="max-width:600px;background-color:#141414;border-radius:8px;border:1px solid #30333A;">
          <tr>
            <td style="padding:40px;">
              <h1 style="margin:0 0 24px;font-size:24px;color:#FDD458;">Welcome aboard, {{name}}</h1>
              {{intro}}
              <p style="font-size:16px;line-height:30px;color:#CCDADC;">Here's what you can do right now:</p>
              <ul style="font-size:16px;line-height:30px;color:#CCDADC;">
                <li>Set up your watchlist to follow your favourite stocks.</li>
                <li>Create price and volume alerts so you never miss a move.</li>
                <li>Read the daily news summary tailored to your watchlist.</li>
              </ul>
              <p style="font-size:14px;color:#9095A1;">Signalist</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


NEWS_SUMMARY_EMAIL_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<body style="margin:0;padding:0;background-color:#050505;font-family:Arial,Helvetica,sans-serif;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color:#050505;">
    <tr>
      <td align="center" style="padding:40px 20px;">
        <table role="presentation" width="600" cellspacing="0" cellpadding="0" style="max-width:600px;background-color:#141414;border-radius:8px;border:1px solid #30333A;">
          <tr>
            <td style="padding:40px;color:#CCDADC;">
              <h1 style="margin:0 0 8px;font-size:24px;color:#FDD458;">Market News Summary Today</h1>
              <p style="margin:0 0 24px;font-size:14px;color:#9095A1;">{{date}}</p>
              {{newsContent}}
              <p style="font-size:12px;color:#6B7280;">You're receiving this because you subscribed to Signalist news updates.</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""
