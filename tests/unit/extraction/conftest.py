"""Component sources shared by extractor tests."""

from __future__ import annotations

import pytest

LOGIN_FORM = """
export function LoginForm({ token }) {
  const handleSubmit = async (event) => {
    event.preventDefault();
    await fetch('/api/login', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json', Authorization: token },
      body: JSON.stringify({ email: 'demo@example.com', remember: true, attempts: 1 }),
    });
  };

  return (
    <form onSubmit={handleSubmit}>
      <input type="email" name="email" placeholder="you@example.com" required />
      <input type="password" name="password" minLength={8} />
      <button type="submit">Sign in</button>
    </form>
  );
}
"""

REGISTER_FORM = """
import { useForm } from 'react-hook-form';

export function SignupForm() {
  const { register, handleSubmit } = useForm();
  return (
    <form onSubmit={handleSubmit(console.log)}>
      <input {...register('username', { required: 'Username is required' })} />
      <input {...register('age', { pattern: { value: /^\\d+$/, message: 'Digits only' } })} />
      <input {...register('isSubscribed')} />
    </form>
  );
}
"""

PROFILE_FORM = """
import { Controller } from 'react-hook-form';

export function ProfileForm({ control }) {
  return (
    <form>
      <select name="role">
        <option value="">Choose a role</option>
        <option value="admin">Administrator</option>
        <option value="user">User</option>
      </select>
      <textarea name="bio" maxLength="200"></textarea>
      <Controller
        name="country"
        control={control}
        rules={{ required: true }}
        render={({ field }) => <input {...field} />}
      />
      <TextField name="nickname" label="Nickname" />
    </form>
  );
}
"""

VALIDATION_FORM = """
export const ValidationForm = () => (
  <form>
    <input name="username" minLength="3" maxLength="20" />
    <input name="age" type="number" min="18" max="99" />
    <input name="zip" pattern="[0-9]{5}" />
    <input name="email" />
    <input type="submit" name="go" />
  </form>
);
"""

API_COMPONENT = """
import axios from 'axios';

export function UserList({ id }) {
  const load = () => axios.get('/api/users');
  const save = (data) => axios.post(`/api/users`, data);
  const remove = () => axios.delete(`/api/users/${id}`);
  const refresh = () => fetch('/api/users/refresh');
  const update = () => fetch(`/api/users/${id}`, { method: 'PUT' });
  const patch = () => fetch('/api/users/bulk', { method: 'patch', body: payload });
  return <button onClick={load}>Load</button>;
}
"""


@pytest.fixture
def login_form() -> str:
    return LOGIN_FORM


@pytest.fixture
def register_form() -> str:
    return REGISTER_FORM


@pytest.fixture
def profile_form() -> str:
    return PROFILE_FORM


@pytest.fixture
def validation_form() -> str:
    return VALIDATION_FORM


@pytest.fixture
def api_component() -> str:
    return API_COMPONENT
